"""Progress observers notified once per completed column."""

from __future__ import annotations

from tqdm import tqdm


class NullProgress:
    def tick(self) -> None:
        pass

    def done(self) -> None:
        pass


class BarProgress:
    """Terminal progress bar over the columns of one frame."""

    def __init__(self, total: int, description: str = "", *, leave: bool = False) -> None:
        self._bar = tqdm(total=total, desc=description, unit="col", leave=leave)

    def tick(self) -> None:
        self._bar.update(1)

    def done(self) -> None:
        self._bar.set_postfix_str("rendered")
        self._bar.close()


class CountingProgress:
    """Records notifications; useful for inspecting a render after the fact."""

    def __init__(self) -> None:
        self.ticks = 0
        self.finished = False

    def tick(self) -> None:
        self.ticks += 1

    def done(self) -> None:
        self.finished = True
