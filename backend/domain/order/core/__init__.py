"""Order core: entities, value objects, events, errors and ports."""
