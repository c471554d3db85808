def compliance_rate(completed: int, total: int) -> int:
    """Completed share of all tasks as a whole percentage, 0 when there are no tasks"""
    if total <= 0:
        return 0
    # half up: 1 of 8 is 13, not banker's 12
    return int(completed * 100 / total + 0.5)
