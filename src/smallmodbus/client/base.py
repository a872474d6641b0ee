"""Helpers shared by the blocking and the asynchronous client."""


def check_unit_id(unit_id: int) -> None:
    """Validate the unit ID of a client.

    Raises:
        ValueError: If the unit ID is not in range 0-255

    """
    if not (0 <= unit_id <= 255):  # noqa: PLR2004
        msg = "Unit ID must be in range 0-255"
        raise ValueError(msg)
