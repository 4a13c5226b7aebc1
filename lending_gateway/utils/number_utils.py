"""Rounding helpers for money and scores"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity (2.5 -> 3)"""
    return math.floor(value + 0.5)


def round_money(value: float) -> float:
    """Round a currency amount to 2 decimal places, halves up"""
    return math.floor(value * 100 + 0.5) / 100
