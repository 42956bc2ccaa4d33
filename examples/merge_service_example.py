"""Small example showing `MergeService` usage on a generated directory.

Run directly to see output:
    python examples/merge_service_example.py
"""
import tempfile

from PIL import Image

from skybox_merger import MergeService, Settings

COLORS = {
    "left": (200, 40, 40),
    "right": (40, 200, 40),
    "up": (40, 40, 200),
    "down": (200, 200, 40),
    "front": (40, 200, 200),
    "back": (200, 40, 200),
}


def main():
    with tempfile.TemporaryDirectory() as folder:
        for face, color in COLORS.items():
            Image.new("RGB", (64, 64), color).save(f"{folder}/demo_{face}.png")

        report = MergeService(Settings(directory=folder, delete_input_files=True)).run()
        print(report.summary())
        for result in report.results:
            if result.output is None:
                print(result.prefix, result.status, result.reason)
                continue
            with Image.open(result.output) as merged:
                print(result.prefix, result.status, f"{merged.width}x{merged.height}", merged.mode)


if __name__ == "__main__":
    main()
