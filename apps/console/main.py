import sys

from packages.shared.paths import log_path
from packages.shared.store import ConfigStore
from packages.core.logging_ import setup_logging
from packages.core.notices.console import RichConsole

from .flow import ShutdownFlow
from .setup_wizard import SetupWizard


def main() -> int:
    console = RichConsole()
    if not setup_logging():
        console.say(f"ログファイルを作成できません ({log_path()})。ログはコンソールにのみ出力します")

    store = ConfigStore()
    try:
        cfg = SetupWizard(store, console).run(store.load())
        ShutdownFlow(cfg, console).run()
    except KeyboardInterrupt:
        console.say("\n中断しました")

    # Failures are reported on the console, never through the exit status.
    return 0


if __name__ == "__main__":
    sys.exit(main())
