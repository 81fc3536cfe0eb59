"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskKind)
- task_codec.py: JSON encode/decode of task collections
- task_store.py: file-backed collections + last reset date
- lifecycle.py: TaskEngine (daily reset, archive, restore, add, delete)
- task_views.py: sorted/filtered lists for display
- errors.py: MalformedRecord / CorruptStore / InvalidInput
"""
