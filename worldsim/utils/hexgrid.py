"""Hex-grid geometry for the odd-r offset layout."""

# Neighbor offsets (dq, dr) by row parity, in a fixed direction order
_EVEN_ROW_DIRECTIONS = ((1, 0), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1))
_ODD_ROW_DIRECTIONS = ((1, 0), (1, 1), (0, 1), (-1, 0), (0, -1), (1, -1))


def hex_id(q: int, r: int, width: int) -> int:
    """Return the flat hex id for column q, row r."""
    return q + r * width


def neighbor_coords(q: int, r: int) -> list[tuple[int, int]]:
    """Return the six neighbor coordinates of (q, r), unbounded.

    The direction table differs by row parity because odd rows are shifted
    half a hex to the right.

    Args:
        q: Column
        r: Row

    Returns:
        List of (q, r) tuples in fixed direction order
    """
    directions = _EVEN_ROW_DIRECTIONS if r % 2 == 0 else _ODD_ROW_DIRECTIONS
    return [(q + dq, r + dr) for dq, dr in directions]


def offset_to_cube(q: int, r: int) -> tuple[int, int, int]:
    """Convert odd-r offset coordinates to cube coordinates (x, y, z)."""
    x = q - (r - (r & 1)) // 2
    z = r
    y = -x - z
    return x, y, z


def hex_distance(q1: int, r1: int, q2: int, r2: int) -> int:
    """Calculate the hex-grid distance between two cells.

    Both cells are converted to cube coordinates and the distance is the
    Chebyshev distance over the three cube axes, i.e. the minimum number of
    hex steps between them.

    Args:
        q1: Column of first cell
        r1: Row of first cell
        q2: Column of second cell
        r2: Row of second cell

    Returns:
        Number of hex steps between the cells

    Examples:
        >>> hex_distance(0, 0, 3, 0)
        3
        >>> hex_distance(0, 0, 0, 2)
        2
    """
    ax, ay, az = offset_to_cube(q1, r1)
    bx, by, bz = offset_to_cube(q2, r2)
    return max(abs(ax - bx), abs(ay - by), abs(az - bz))
