"""
Flow engine package.

This package contains the pieces that run multi-step conversations:
- flow_definition: flow definitions and the registry they are looked up in
- flow_engine: the per-conversation stack of running flows
- prompts: recognition of user input against a pending prompt
- interrupts: keyword interrupts that re-ask without losing collected values
"""
