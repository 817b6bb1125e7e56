"""
Fixed-Layout CAPTCHA Reading Pipeline

Main script that threads a CAPTCHA image through all stages.
Process: Decode -> Saturation -> Grid Reshape -> Block Extraction -> Binarization -> Classification

Usage:
    python captcha_pipeline.py <image_or_directory> [...] [--model <weights.json>] [--verbose]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Tuple, Union

from captcha_stages import (
    CaptchaError,
    ShapeError,
    SaturationTransform,
    GridReshaper,
    BlockExtractor,
    Binarizer,
    ModelStore,
    LinearClassifier,
    ImageDecoder,
)
from captcha_stages.decoding import DecodedImage
from captcha_stages.logger import setup_logging
from captcha_stages.saturation import BytesLike
from captcha_config import PipelineConfig


# Named explicitly so the logger is configured when run as a script
logger = logging.getLogger('captcha_pipeline')


class CaptchaSolver:
    """Main pipeline for reading fixed-layout CAPTCHAs."""

    def __init__(self, store: ModelStore = None, config: dict = None):
        """
        Initialize all pipeline stages.

        Args:
            store: Classifier weights, uses the packaged model if None
            config: Optional geometry config, uses PipelineConfig.GEOMETRY if None
        """
        self.config = config or PipelineConfig.GEOMETRY
        self.decoder = ImageDecoder()
        self.saturation = SaturationTransform(self.config)
        self.reshaper = GridReshaper(self.config)
        self.extractor = BlockExtractor(self.config)
        self.binarizer = Binarizer(self.config)
        self.classifier = LinearClassifier(store)

    def parse_from_file(self, path: Union[str, Path]) -> str:
        return ''.join(char for char, _ in self.process_file(path))

    def process_file(self, path: Union[str, Path]) -> List[Tuple[str, float]]:
        """Read, decode and check an image file, then return (character, probability) per block."""
        image = self.decoder.decode(self.decoder.read_file(path))
        self.check_geometry(image)
        return self.process_pixels(image.pixels)

    def parse_from_base64(self, data: str) -> str:
        return self.parse_from_bytes(self.decoder.decode_base64(data))

    def parse_from_bytes(self, data: bytes) -> str:
        return self.parse_image(self.decoder.decode(data))

    def parse_image(self, image: DecodedImage) -> str:
        self.check_geometry(image)
        return self.parse_pixels(image.pixels)

    def check_geometry(self, image: DecodedImage) -> None:
        expected = (self.config['WIDTH'], self.config['HEIGHT'])
        if (image.width, image.height) != expected:
            raise ShapeError(
                f"Image is {image.width}x{image.height}, expected {expected[0]}x{expected[1]}"
            )

    def parse_pixels(self, pixels: BytesLike) -> str:
        """
        Read the answer from a raw RGBA buffer.

        Args:
            pixels: Interleaved R,G,B,A bytes of a WIDTH x HEIGHT image

        Returns:
            The CAPTCHA text, one character per block
        """
        return ''.join(char for char, _ in self.process_pixels(pixels))

    def process_pixels(self, pixels: BytesLike) -> List[Tuple[str, float]]:
        """Run every stage and return (character, probability) per block."""
        sat = self.saturation.transform(pixels)
        grid = self.reshaper.reshape(sat)
        blocks = self.extractor.extract(grid)

        results = []
        for index, block in enumerate(blocks):
            binary = self.binarizer.binarize(block)
            char, prob = self.classifier.classify_with_confidence(binary)
            logger.debug("Block %d -> %r (p=%.3f)", index, char, prob)
            results.append((char, prob))

        return results


def collect_images(paths: List[str]) -> List[Path]:
    """Expand directories into their image files."""
    image_files = []
    for entry in paths:
        path = Path(entry)
        if path.is_dir():
            found = []
            for ext in PipelineConfig.IMAGE_EXTENSIONS:
                found.extend(path.glob(ext))
            image_files.extend(sorted(set(found)))
        else:
            image_files.append(path)
    return image_files


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(description='Fixed-Layout CAPTCHA Reader')
    parser.add_argument('paths', nargs='+', help='Image files or directories containing images')
    parser.add_argument('--model', '-m', type=str, help='Model JSON (default: packaged weights)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Print per-character probabilities')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level')
    parser.add_argument('--log-file', type=str, help='Also write logs to this file')

    args = parser.parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    image_files = collect_images(args.paths)
    if not image_files:
        print("No images found!")
        return 1

    try:
        store = ModelStore.from_file(args.model) if args.model else ModelStore.embedded()
    except CaptchaError as e:
        print(f"Error: {e}")
        return 1

    solver = CaptchaSolver(store)

    failures = 0
    for img_path in image_files:
        try:
            results = solver.process_file(img_path)
        except CaptchaError as e:
            failures += 1
            print(f"{img_path.name}: {type(e).__name__}: {e}")
            continue

        text = ''.join(char for char, _ in results)
        print(f"{img_path.name}: {text}")
        if args.verbose:
            details = '  '.join(f"{char}={prob:.3f}" for char, prob in results)
            print(f"  {details}")

    if failures:
        print(f"\n{failures}/{len(image_files)} image(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
