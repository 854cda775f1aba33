"""Command line entry point for the photo-to-panorama engine."""
import argparse
import json
import logging
import sys
from pathlib import Path

from photopano.models.panorama import SourceImage
from photopano.processing.errors import ConversionFailure
from photopano.processing.pipeline import create_engine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Photo to 360 panorama converter")
    parser.add_argument(
        "-c", "--config",
        default="config.json",
        help="Path to the configuration file (default: config.json)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("methods", help="List the available conversion methods")

    validate = commands.add_parser("validate", help="Check whether a photo can be converted")
    validate.add_argument("image", help="Photo to validate")

    convert = commands.add_parser("convert", help="Convert one photo to an equirectangular panorama")
    convert.add_argument("image", help="Photo to convert")
    convert.add_argument("-o", "--output", default="data/output/panorama.jpg",
                         help="Output path for the panorama (default: data/output/panorama.jpg)")
    convert.add_argument("-m", "--method", default="perspective",
                         help="Conversion method (default: perspective)")
    convert.add_argument("--thumbnail", help="Optional output path for a 400x200 preview")

    stitch = commands.add_parser("stitch", help="Stitch several photos into one image")
    stitch.add_argument("images", nargs="+", help="Photos to stitch, in order")
    stitch.add_argument("-o", "--output", default="data/output/stitched.jpg",
                        help="Output path for the composite (default: data/output/stitched.jpg)")
    stitch.add_argument("--layout", default="horizontal",
                        choices=["horizontal", "vertical", "panoramic"])
    stitch.add_argument("--overlap", type=float, default=0.1,
                        help="Fraction of each image overlapped by the next (default: 0.1)")
    stitch.add_argument("--quality", type=int, default=90,
                        help="JPEG quality of the composite (default: 90)")
    stitch.add_argument("--thumbnail", help="Optional output path for a 400x200 preview")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    engine = create_engine(args.config)

    if args.command == "methods":
        print(json.dumps([method.to_dict() for method in engine.list_methods()], indent=2))
        return

    if args.command == "validate":
        report = engine.validate(SourceImage.from_path(args.image))
        output = report.to_dict()
        output['recommendations'] = [
            {'method': rec.method, 'reason': rec.reason} for rec in engine.recommend(report)
        ]
        print(json.dumps(output, indent=2))
        if not report.is_valid:
            sys.exit(1)
        return

    if args.command == "convert":
        if not Path(args.image).exists():
            logger.error(f"Input image does not exist: {args.image}")
            sys.exit(1)

        try:
            panorama = engine.process_single_image(SourceImage.from_path(args.image), args.method)
        except ConversionFailure as e:
            logger.error(str(e))
            sys.exit(1)

        if not panorama.success:
            logger.error(f"{panorama.error}: {'; '.join(panorama.validation.issues)}")
            sys.exit(1)
    else:
        panorama = engine.process_images(
            [SourceImage.from_path(path) for path in args.images],
            {'layout': args.layout, 'overlap': args.overlap, 'quality': args.quality}
        )
        if not panorama.success:
            logger.error(f"Stitching failed: {panorama.error}")
            sys.exit(1)

    panorama.save_image(args.output, args.thumbnail)
    logger.info("Processing completed successfully!")
    print(f"Panorama saved to: {args.output} ({panorama.width}x{panorama.height}, {panorama.method})")


if __name__ == "__main__":
    main()
