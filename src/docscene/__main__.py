import argparse
import logging
from typing import Optional

import numpy as np

from docscene.content import SampleContentProvider
from docscene.errors import PipelineFailure
from docscene.params import RenderConfig
from docscene.pipeline import render
from docscene.version import __version__

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="docscene command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser("render", help="Render one document photo")
    render_parser.add_argument("output_file", help="Output JPEG file")
    render_parser.add_argument("--seed", type=int, default=None, help="Random seed.")
    render_parser.add_argument(
        "--quality", type=int, default=90, help="JPEG quality (1-95)."
    )
    render_parser.add_argument(
        "--card-only", action="store_true", help="Skip the scene composition."
    )
    render_parser.add_argument(
        "--portrait", default=None, help="Portrait image URL or path."
    )
    render_parser.add_argument("--logo", default=None, help="Logo image URL or path.")
    render_parser.add_argument(
        "--strict-portrait",
        action="store_true",
        help="Fail instead of drawing a placeholder when the portrait is missing.",
    )
    render_parser.add_argument(
        "--font-dir", default=None, help="Directory holding the font files."
    )

    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("docscene").setLevel(logging.DEBUG)
    else:
        logging.getLogger("docscene").setLevel(logging.INFO)

    if args.command == "render":
        try:
            config = RenderConfig(
                jpeg_quality=args.quality,
                strict_portrait=args.strict_portrait,
                font_dir=args.font_dir,
                scene_enabled=not args.card_only,
            )
        except ValueError as e:
            logger.error(str(e))
            return 1
        provider = SampleContentProvider(
            portrait_url=args.portrait,
            logo_url=args.logo,
            width=config.card_width,
            height=config.card_height,
        )
        try:
            data = render(provider, config, np.random.default_rng(args.seed))
        except PipelineFailure as e:
            logger.error(str(e))
            return 1
        with open(args.output_file, "wb") as f:
            f.write(data)
        logger.info("Wrote %s" % args.output_file)

    return None


if __name__ == "__main__":
    main()
