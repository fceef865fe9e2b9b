from typing import Dict, Set


def group_by_new_name(renaming: Dict[str, str]) -> Dict[str, Set[str]]:
    """
    Inverts an old name -> new name map into new name -> {old names}.

    Example: q0 and q1 were merged into q0, so {'q0': 'q0', 'q1': 'q0'}
    becomes {'q0': {'q0', 'q1'}}.
    """
    groups: Dict[str, Set[str]] = {}
    for old_name, new_name in renaming.items():
        # Create the set for a new name on first encounter
        if new_name not in groups:
            groups[new_name] = set()
        groups[new_name].add(old_name)
    return groups


def groups_to_dict(groups: Dict[str, Set[str]]) -> Dict[str, list]:
    """JSON-friendly form of the groups: sorted keys, sorted old-name lists."""
    return {new_name: sorted(groups[new_name]) for new_name in sorted(groups)}
