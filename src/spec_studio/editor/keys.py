"""Key helpers for the maps that commands add to and rename within."""


def unique_name(existing, base: str) -> str:
    """`base`, or `base1`, `base2`, ... whichever is first free in `existing`."""
    name = base
    counter = 1
    while name in existing:
        name = f"{base}{counter}"
        counter += 1
    return name


def rename_key(mapping: dict, old: str, new: str) -> dict:
    """Copy of `mapping` with `old` renamed to `new`, keeping its position.

    An entry already stored under `new` is replaced.
    """
    value = mapping[old]
    renamed = {}
    for key, val in mapping.items():
        if key == old:
            renamed[new] = value
        elif key != new:
            renamed[key] = val
    return renamed
