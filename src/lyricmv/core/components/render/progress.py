"""Console progress for long-running exports."""

BAR_LENGTH = 30
STEP_PERCENT = 2


class ConsoleProgressBar:
    """Single-line console bar, redrawn every ``STEP_PERCENT`` percent.

    Instances are callable as ``(index, total)``, the signature of the
    export progress callback.
    """

    def __init__(self, total: int = 0, prefix: str = "Rendering"):
        self.total = total
        self.prefix = prefix
        self.current = 0
        self.last_percent = -1

    def __call__(self, index: int, total: int) -> None:
        self.total = total
        self.current = index
        self.update()

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 0
        return int(100 * self.current / self.total)

    def update(self) -> None:
        """Advance by one item and redraw when a new step is reached."""
        self.current += 1
        percent = self.percent
        if percent == self.last_percent or percent % STEP_PERCENT:
            return
        filled = BAR_LENGTH * percent // 100
        bar = "█" * filled + "░" * (BAR_LENGTH - filled)
        print(f"\r  {self.prefix}: [{bar}] {percent}%", end="", flush=True)
        self.last_percent = percent

    def finish(self) -> None:
        if self.last_percent >= 0:
            print()
