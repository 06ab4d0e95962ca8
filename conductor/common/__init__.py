"""Types shared by the orchestrator and the workers."""
