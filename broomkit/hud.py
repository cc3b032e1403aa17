"""The score panel's game logic: gold, score, rate and the force gauge.

Gold and score are shown as counters that climb toward their true values a
little each frame.  The force gauge fills every frame and, once past its
maximum, stays full until a bomb is used.
"""

from __future__ import annotations

from enum import Enum

FORCE_MAX = 9000
FORCE_BOMB = FORCE_MAX // 3
FORCE_FULL = -1

RATE_MIN = 1000
RATE_MAX = 99999
RATE_STEP = 3000
RATE_DECAY = 300
COUNTER_STEPS = 100
DIGITS = 10


class Bonus(Enum):
    """Bonuses the panel hands out."""

    ENERGY_MAX = "energymax"
    RATE_UP = "rateup"


class Hud:
    """Score, gold, rate and force state updated once per frame."""

    def __init__(self) -> None:
        self.score = 0
        self.gold = 0
        self.rate = 0
        self.force = 0
        self.shown_score = 0
        self.shown_gold = 0
        self.score_add = 0
        self.gold_add = 0
        self.rate_add = 0
        self.force_add = 0
        self.rate_count = RATE_STEP
        self.is_add_force = True

    @property
    def force_full(self) -> bool:
        """Whether the gauge has overflowed and waits for a bomb."""
        return self.force == FORCE_FULL

    @property
    def bomb_ready(self) -> bool:
        """Whether a bomb can be started now."""
        return self.force_full or self.force > FORCE_BOMB

    @property
    def score_text(self) -> str:
        """The shown score as the panel prints it."""
        return f"{self.shown_score:0{DIGITS}d}"

    @property
    def gold_text(self) -> str:
        """The shown gold as the panel prints it."""
        return f"{self.shown_gold:0{DIGITS}d}"

    def set_score(self, score: int) -> None:
        """Set the score, showing it at once."""
        self.score = score
        self.shown_score = score
        self.score_add = 0

    def set_gold(self, gold: int) -> None:
        """Set the gold, showing it at once."""
        self.gold = gold
        self.shown_gold = gold
        self.gold_add = 0

    def add_score(self, score: int) -> None:
        """Add to the score; the shown counter catches up over the next frames."""
        self.score += score
        self.score_add = (self.score - self.shown_score) // COUNTER_STEPS

    def add_gold(self, gold: int) -> None:
        """Add gold scaled by the current rate (per mille)."""
        self.gold += gold * self.rate // 1000
        self.gold_add = (self.gold - self.shown_gold) // COUNTER_STEPS

    def set_add_rate(self, add: int) -> None:
        """Set the per-frame rate change; a negative value makes the rate decay."""
        self.rate_add = add

    def set_add_force(self, add: int) -> None:
        """Set how much the force gauge fills each frame."""
        self.force_add = add

    def boot_bomb(self, flag: bool) -> bool:
        """Try to start a bomb while ``flag`` is held; return whether one started.

        A started bomb pauses filling of the gauge until called with ``flag``
        false.
        """
        if flag:
            if self.force > FORCE_BOMB:
                self.is_add_force = False
                self.force -= FORCE_BOMB
                return True
            if self.force == FORCE_FULL:
                self.is_add_force = False
                self.force = FORCE_MAX - FORCE_BOMB
                return True
        else:
            self.is_add_force = True
        return False

    def _update_force(self, bonuses: list) -> None:
        if self.force == FORCE_FULL:
            return
        if self.is_add_force:
            self.force += self.force_add
        if self.force > FORCE_MAX:
            self.force = FORCE_FULL
            bonuses.append(Bonus.ENERGY_MAX)

    def _update_counters(self) -> None:
        self.shown_gold += self.gold_add
        if self.shown_gold > self.gold:
            self.gold = self.shown_gold
            self.gold_add = 0
        self.shown_score += self.score_add
        if self.shown_score > self.score:
            self.score = self.shown_score
            self.score_add = 0

    def _update_rate(self, bonuses: list) -> None:
        if self.rate_add < 0:
            self.rate -= self.rate // RATE_DECAY
            if self.rate < RATE_MIN:
                self.rate = RATE_MIN
            return
        self.rate = min(self.rate + self.rate_add, RATE_MAX)
        if self.rate >= self.rate_count:
            self.rate_count += RATE_STEP
            bonuses.append(Bonus.RATE_UP)

    def update(self) -> list:
        """Advance one frame; return the bonuses it produced, in order."""
        bonuses: list = []
        self._update_force(bonuses)
        self._update_counters()
        self._update_rate(bonuses)
        return bonuses