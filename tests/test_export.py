from stickergrid.pipeline import Bitmap, StickerSet
from stickergrid.pipeline.export import sticker_filename


def test_sticker_filename():
    assert sticker_filename(1) == "01.png"
    assert sticker_filename(40) == "40.png"


def test_entries_order_and_names(solid):
    sticker_set = StickerSet(
        stickers=[solid(4, 4), solid(4, 4)], main=solid(2, 2), tab=solid(3, 2)
    )
    names = [name for name, _ in sticker_set.entries()]
    assert names == ["main.png", "tab.png", "01.png", "02.png"]


def test_entries_skip_missing_icons(solid):
    names = [name for name, _ in StickerSet(stickers=[solid(4, 4)]).entries()]
    assert names == ["01.png"]


def test_write(tmp_path, solid):
    sticker_set = StickerSet(stickers=[solid(5, 6, (1, 2, 3, 0))], tab=solid(96, 74))
    written = sticker_set.write(tmp_path / "out")

    assert sorted(p.name for p in written) == ["01.png", "tab.png"]
    cell = Bitmap.open(tmp_path / "out" / "01.png")
    assert cell.size == (5, 6)
    assert tuple(cell.pixels[0, 0]) == (1, 2, 3, 0)
