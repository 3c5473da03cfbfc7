# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chronologically ordered key generation in the Firebase push-ID format.

A key is 20 characters: 8 encode the creation time in milliseconds and 12
are random. Keys generated within the same millisecond increment the random
part, so keys sort lexicographically in generation order.
"""

import random
from collections.abc import Callable

from famlink.utils.datetime import epoch_millis

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"

TIMESTAMP_LENGTH = 8
RANDOM_LENGTH = 12


class PushIdGenerator:
    """Stateful push-ID generator.

    Example:
        >>> generate = PushIdGenerator()
        >>> key = generate()
        >>> len(key)
        20
    """

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            clock: Returns the current time in epoch milliseconds.
            rng: Random source for the random suffix.
        """
        self._clock = clock or epoch_millis
        self._rng = rng or random.SystemRandom()
        self._last_time = -1
        self._last_random = [0] * RANDOM_LENGTH

    def __call__(self) -> str:
        now = self._clock()
        duplicate_time = now == self._last_time
        self._last_time = now

        timestamp_chars = []
        remaining = now
        for _ in range(TIMESTAMP_LENGTH):
            timestamp_chars.append(PUSH_CHARS[remaining % 64])
            remaining //= 64
        if remaining != 0:
            raise ValueError(f"Timestamp {now} does not fit in a push ID")

        if duplicate_time:
            # Carry the increment through trailing maxed-out digits
            index = RANDOM_LENGTH - 1
            while index >= 0 and self._last_random[index] == 63:
                self._last_random[index] = 0
                index -= 1
            if index >= 0:
                self._last_random[index] += 1
        else:
            self._last_random = [self._rng.randrange(64) for _ in range(RANDOM_LENGTH)]

        random_chars = (PUSH_CHARS[value] for value in self._last_random)
        return "".join(reversed(timestamp_chars)) + "".join(random_chars)
