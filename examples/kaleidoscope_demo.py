"""
Kaleidoscope Mirroring Examples

Draws a four-color calibration image, mirrors it in every direction and
shows the directives each call queues.
"""

import sys
import tempfile
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from MZ_Libs.DirectiveLib.directive_models import Direction
from MZ_Libs.EngineLib.image_handle import ImageHandle, subclass

QUADRANTS = {
    "top left": (50, 50),
    "top right": (150, 50),
    "bottom left": (50, 150),
    "bottom right": (150, 150),
}


def calibration():
    return (
        ImageHandle(width=200, height=200, color="yellow")
        .fill("red").draw_rectangle(100, 0, 200, 200)
        .fill("lime").draw_rectangle(0, 100, 100, 200)
        .fill("blue").draw_rectangle(100, 100, 200, 200)
    )


def describe(handle):
    for name, (x, y) in QUADRANTS.items():
        print(f"  {name:>12}: {handle.color_at(x, y)}")


def example_queued_directives():
    """Example: What a single call queues."""
    print("=" * 60)
    print("Example 1: Queued Directives")
    print("=" * 60)

    handle = ImageHandle(width=10, height=10).mirrorize("northeast")
    print(" ".join(handle.command_args()))
    print()


def example_all_directions(output_dir):
    """Example: Every direction on the calibration image."""
    print("=" * 60)
    print("Example 2: All Directions")
    print("=" * 60)

    for direction in Direction:
        handle = calibration().mirrorize(direction.value)
        path = handle.write(output_dir / f"calibration_{direction.value}.png")
        print(f"\n{direction.value} -> {path.name}")
        describe(handle)

    print()


def example_chaining():
    """Example: Chained operations."""
    print("=" * 60)
    print("Example 3: Chaining")
    print("=" * 60)

    handle = calibration().resize(200, 150, "!").crop(150, 100).mirrorize("east").mirrorize("south")
    print(f"Size after resize, crop, east, south: {handle.size()}")

    handle = calibration().mirrorize("north").mirrorize("west")
    print("north then west:")
    describe(handle)
    print()


def example_graphicsmagick():
    """Example: Engines without a directive stack ignore mirrorize."""
    print("=" * 60)
    print("Example 4: GraphicsMagick Handles")
    print("=" * 60)

    Graphics = subclass(image_magick=False)
    handle = Graphics(width=10, height=10).mirrorize("south")
    print(f"Queued directives: {len(handle.directives)}")
    print()


def main():
    """Run all mirroring examples."""
    print("\n" + "=" * 60)
    print("KALEIDOSCOPE MIRRORING DEMONSTRATION")
    print("=" * 60)
    print()

    example_queued_directives()

    with tempfile.TemporaryDirectory() as tmpdir:
        example_all_directions(Path(tmpdir))

    example_chaining()
    example_graphicsmagick()


if __name__ == "__main__":
    main()
