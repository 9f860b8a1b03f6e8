"""Hi-Lo card counting system."""

from engine.counting.base import CountingSystem


class HiLoSystem(CountingSystem):
    """
    Hi-Lo: 2-6 count +1, 7-9 count 0, tens and aces count -1.

    The system is balanced, so a fully dealt shoe counts back to zero.
    """

    name = "Hi-Lo"
    tags = {
        2: 1, 3: 1, 4: 1, 5: 1, 6: 1,
        7: 0, 8: 0, 9: 0,
        10: -1, 11: -1,
    }
