"""Top-level screens, their hotkeys and the menu bar labels."""
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple


class Screen(Enum):
    HOME = 0
    TODOS = 1
    TIMERS = 2
    TIME_TRACKING = 3

    @property
    def tab_index(self) -> int:
        return self.value


MENU_TITLES: Tuple[str, ...] = ("Home", "Todos", "Timers", "TimeTracking", "Quit")

SCREEN_HOTKEYS: Dict[str, Screen] = {
    'w': Screen.HOME,
    't': Screen.TODOS,
    'i': Screen.TIMERS,
    'm': Screen.TIME_TRACKING,
}
QUIT_KEY = 'q'

# (text before the hotkey, hotkey letter, text after it)
Label = Tuple[str, str, str]


def screen_for_key(key: str) -> Optional[Screen]:
    """Screen selected by `key`, or None for anything that is not a screen hotkey."""
    return SCREEN_HOTKEYS.get(key)


def hotkey_labels(titles: Sequence[str] = MENU_TITLES) -> List[Label]:
    """Split each title around its highlighted hotkey letter.

    Each title gets the first of its first two characters that no earlier
    title already highlighted; otherwise its third character is used
    unchecked. Only good for a handful of distinct titles.
    """
    used: Set[str] = set()
    labels: List[Label] = []
    for title in titles:
        pos = 2
        for candidate in (0, 1):
            if candidate < len(title) and title[candidate] not in used:
                pos = candidate
                break
        if pos >= len(title):
            # short title: highlight nothing
            labels.append((title, '', ''))
            continue
        used.add(title[pos])
        labels.append((title[:pos], title[pos], title[pos + 1:]))
    return labels
