"""Plain-language readings of the true count."""


def describe_true_count(true_count: float) -> str:
    """Describe how far the count has moved from neutral."""
    magnitude = abs(true_count)
    positive = true_count > 0

    if magnitude < 1:
        return "Neutral"
    if magnitude < 2:
        return "Slightly positive" if positive else "Slightly negative"
    if magnitude < 3:
        return "Positive" if positive else "Negative"
    if magnitude < 5:
        return "Very positive" if positive else "Very negative"
    return "Extremely positive" if positive else "Extremely negative"


def betting_recommendation(true_count: float) -> str:
    """Suggest a bet size bucket for the true count."""
    if true_count <= -2:
        return "Minimum bet"
    if true_count < 0:
        return "Small bet"
    if true_count < 2:
        return "Medium bet"
    if true_count < 4:
        return "Large bet"
    return "Maximum bet"


def insurance_worthwhile(true_count: float, threshold: float = 3.0) -> bool:
    """Hi-Lo insurance index: take insurance at a true count of +3 or more."""
    return true_count >= threshold
