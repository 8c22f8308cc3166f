"""
Task subsystem.

Components:
- params.py: typed parameters, one dataclass per endpoint variant
- codec.py: CBOR diagnostic notation <-> params
- registry.py: endpoint tag -> variant (decoder, remote endpoint)
- task_models.py: Task, TaskCollection (document parsing)
- dispatcher.py: execute(task, client) -> DispatchOutcome
- task_scheduler.py: cron polling loop that fires due tasks
"""
