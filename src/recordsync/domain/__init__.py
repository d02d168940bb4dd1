"""Synchronization core: records, entities, ports and orchestration."""
