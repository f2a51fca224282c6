"""
Helper functions for terminal i/o
=================================
"""


def confirm_name(message, name, force=False):
    """Ask the user to type a name again before a destructive operation.

    Parameters
    ----------
    message: str
        The message to be printed.
    name: str
        The string that the user must enter.
    force: bool
        Skip the question and return True. Default: False.

    Returns
    -------
    bool
        True if confirmed, False otherwise.

    """
    if force:
        print(message)
        print("FORCED")
        return True

    answer = input(message)

    return answer.strip() == name
