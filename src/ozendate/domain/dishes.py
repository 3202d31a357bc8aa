"""Tableware catalog entries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Dish:
    """A tableware item that can be placed on the table."""

    display_name: str
    generation_name: str
    thumbnail_url: str | None = None


RECOMMENDED_DISHES: tuple[Dish, ...] = (
    Dish(
        display_name="青い陶器のボウル",
        generation_name="a blue ceramic bowl",
        thumbnail_url="https://placehold.co/200x200.png/3498db/ffffff?text=青いボウル",
    ),
    Dish(
        display_name="木製のサラダボウル",
        generation_name="a wooden salad bowl",
        thumbnail_url="https://placehold.co/200x200.png/8b5e3c/ffffff?text=木製ボウル",
    ),
    Dish(
        display_name="ガラスのコップ",
        generation_name="a clear glass cup",
        thumbnail_url="https://placehold.co/200x200.png/a2d2ff/ffffff?text=コップ",
    ),
    Dish(
        display_name="白いモダンな平皿",
        generation_name="a white modern flat plate",
        thumbnail_url="https://placehold.co/200x200.png/ecf0f1/34495e?text=白い皿",
    ),
    Dish(
        display_name="黒い石のスレート皿",
        generation_name="a black stone slate plate",
        thumbnail_url="https://placehold.co/200x200.png/34495e/ffffff?text=石の皿",
    ),
    Dish(
        display_name="和柄の小皿",
        generation_name="a small plate with a traditional Japanese pattern",
        thumbnail_url="https://placehold.co/200x200.png/c0392b/ffffff?text=和柄の皿",
    ),
    Dish(
        display_name="ステンレスのカトラリー",
        generation_name="a set of stainless steel cutlery",
        thumbnail_url="https://placehold.co/200x200.png/bdc3c7/34495e?text=カトラリー",
    ),
    Dish(
        display_name="リネンのナプキン",
        generation_name="a folded linen napkin",
        thumbnail_url="https://placehold.co/200x200.png/f1e0b5/34495e?text=ナプキン",
    ),
)
