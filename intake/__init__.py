"""
Intake form draft backend package.

Design intent:
- Keep the draft lifecycle (create/save/submit) in one small domain module.
- Keep persistence behind a store interface so tests can swap in memory.
"""
