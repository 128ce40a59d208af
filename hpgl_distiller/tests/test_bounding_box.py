"""Tests for bounding-box extents and the normalisation rewrite.

Covers the two-pass contract: extents over PA/PD/PU/PR pairs, then
``(x - min_x + x_offset, y - min_y + y_offset)`` for every pair, with
offsets still applied when normalisation is off.
"""

from __future__ import annotations

from hpgl_distiller.geometry.bounding_box import (
    BoundingBox,
    compute_bounding_box,
    normalize,
)
from hpgl_distiller.hpgl.commands import Command


def _cmds(*entries: tuple[str, bytes]) -> list[Command]:
    return [Command(m, a) for m, a in entries]


# ---------------------------------------------------------------------------
# Extents
# ---------------------------------------------------------------------------


class TestComputeBoundingBox:
    def test_extents_over_all_pairs(self) -> None:
        cmds = _cmds(("PU", b"-5,20"), ("PD", b"0,10,15,30"))
        bbox = compute_bounding_box(cmds)
        assert bbox == BoundingBox(min_x=-5, min_y=10, width=20, height=20)
        assert bbox.max_x == 15
        assert bbox.max_y == 30

    def test_relative_moves_counted(self) -> None:
        bbox = compute_bounding_box(_cmds(("PA", b"10,10"), ("PR", b"-20,5")))
        assert bbox is not None
        assert (bbox.min_x, bbox.min_y) == (-20, 5)

    def test_non_coordinate_commands_ignored(self) -> None:
        bbox = compute_bounding_box(
            _cmds(("IN", b""), ("PG", b"1000,1000"), ("PA", b"3,4")),
        )
        assert bbox == BoundingBox(3, 4, 0, 0)

    def test_unparseable_pairs_ignored(self) -> None:
        bbox = compute_bounding_box(_cmds(("PA", b"xx,yy"), ("PA", b"7,8")))
        assert bbox == BoundingBox(7, 8, 0, 0)

    def test_extents_from_single_pass(self) -> None:
        cmds = (Command("PD", b"%d,%d" % (x, y)) for x, y in [(9, -1), (-4, 7), (3, 2)])
        bbox = compute_bounding_box(cmds)
        assert bbox == BoundingBox(min_x=-4, min_y=-1, width=13, height=8)

    def test_no_coordinates(self) -> None:
        assert compute_bounding_box(_cmds(("IN", b""), ("PU", b""))) is None
        assert compute_bounding_box([]) is None


# ---------------------------------------------------------------------------
# Rewrite
# ---------------------------------------------------------------------------


class TestNormalize:
    def test_shift_to_origin(self) -> None:
        cmds = _cmds(("PU", b"-5,20"), ("PD", b"0,10"), ("PD", b"15,30"))
        bbox = compute_bounding_box(cmds)
        out = list(normalize(cmds, bbox))
        # min is (-5, 10): x grows by 5, y shrinks by 10
        assert [c.coordinate_pairs() for c in out] == [
            ((0, 10),),
            ((5, 0),),
            ((20, 20),),
        ]

    def test_shift_then_user_offset(self) -> None:
        cmds = _cmds(("PA", b"100,200"), ("PA", b"150,260"))
        bbox = compute_bounding_box(cmds)
        out = list(normalize(cmds, bbox, x_offset=10, y_offset=-3))
        assert [c.encode() for c in out] == [b"PA10,-3", b"PA60,57"]

    def test_offsets_without_bounding_box(self) -> None:
        cmds = _cmds(("PD", b"1,2,3,4"))
        out = list(normalize(cmds, None, x_offset=100, y_offset=50))
        assert out == [Command("PD", b"101,52,103,54")]

    def test_no_shift_passes_commands_through(self) -> None:
        cmds = _cmds(("PA", b"1, 2"), ("PU", b""))
        out = list(normalize(cmds, None))
        assert all(a is b for a, b in zip(out, cmds))

    def test_non_coordinate_commands_untouched(self) -> None:
        cmds = _cmds(("IN", b""), ("PG", b"5,5"), ("!PG", b""))
        out = list(normalize(cmds, BoundingBox(1, 1, 0, 0), 3, 3))
        assert out == cmds

    def test_unparseable_and_bare_commands_untouched(self) -> None:
        cmds = _cmds(("PA", b"xx,yy"), ("PU", b""), ("PD", b"1,2,3"))
        out = list(normalize(cmds, None, 10, 10))
        assert out == cmds

    def test_order_preserved(self) -> None:
        cmds = [Command("PA", b"%d,%d" % (i, -i)) for i in range(20)]
        out = list(normalize(cmds, compute_bounding_box(cmds)))
        assert [c.coordinate_pairs()[0][0] for c in out] == list(range(20))
