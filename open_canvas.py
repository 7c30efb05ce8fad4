import argparse
import logging
import sys
from typing import List, Optional

from PyQt5.QtWidgets import QApplication

from OC_Libs.config import load_config
from OC_Libs.SceneLib.scene_editor_window import OpenCanvasWindow


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Open Canvas image editor")
    parser.add_argument("--config", help="Path to a JSON config file")
    args, qt_args = parser.parse_known_args(argv if argv is not None else sys.argv[1:])

    config = load_config(args.config)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not config.api_key:
        logging.getLogger(__name__).warning(
            "No Pixabay API key configured; set PIXABAY_API_KEY to enable search"
        )

    app = QApplication([sys.argv[0]] + qt_args)
    window = OpenCanvasWindow(config)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
