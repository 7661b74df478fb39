from pathlib import Path
from src.ui_core import UiApp


def main():
    # Run from the server directory; the config file and the default server_dir live there.
    app_dir = Path.cwd()
    UiApp(app_dir).run()


if __name__ == "__main__":
    main()
