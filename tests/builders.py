"""Build synthetic hand landmark sets for tests."""

from __future__ import annotations

from gesture_interpreter import FingerIndex, HandLandmark, Point

ALL_FINGERS = frozenset(FingerIndex)

# (mcp, pip, dip, tip) for each finger, in FingerIndex order
FINGERS = (
    (HandLandmark.THUMB_MCP, HandLandmark.THUMB_CMC, HandLandmark.THUMB_IP, HandLandmark.THUMB_TIP),
    (
        HandLandmark.INDEX_FINGER_MCP,
        HandLandmark.INDEX_FINGER_PIP,
        HandLandmark.INDEX_FINGER_DIP,
        HandLandmark.INDEX_FINGER_TIP,
    ),
    (
        HandLandmark.MIDDLE_FINGER_MCP,
        HandLandmark.MIDDLE_FINGER_PIP,
        HandLandmark.MIDDLE_FINGER_DIP,
        HandLandmark.MIDDLE_FINGER_TIP,
    ),
    (
        HandLandmark.RING_FINGER_MCP,
        HandLandmark.RING_FINGER_PIP,
        HandLandmark.RING_FINGER_DIP,
        HandLandmark.RING_FINGER_TIP,
    ),
    (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP, HandLandmark.PINKY_DIP, HandLandmark.PINKY_TIP),
)


def make_landmarks(
    extended: frozenset[FingerIndex] | set[FingerIndex] = frozenset(),
    wrist: tuple[float, float] = (0.5, 0.7),
    palm_width: float = 0.2,
    pinch_distance: float | None = None,
) -> list[Point]:
    """Build 21 landmarks of an upright hand.

    Extended fingers have their tip 0.2 above their MCP (0.15 beside it for the thumb), bent fingers
    0.05 above it (0.03 beside it for the thumb). The index and pinky MCPs are `palm_width` apart
    horizontally. If `pinch_distance` is given, the thumb tip is moved at this distance right of the
    index tip, whatever the thumb extension.
    """
    wx, wy = wrist
    half = palm_width / 2
    mcps = (
        (wx - half - 0.05, wy - 0.02),  # thumb
        (wx - half, wy - 0.1),
        (wx - palm_width / 6, wy - 0.1),
        (wx + palm_width / 6, wy - 0.1),
        (wx + half, wy - 0.1),
    )

    points = [Point(wx, wy)] * 21
    for finger in FingerIndex:
        mcp_x, mcp_y = mcps[finger]
        if finger == FingerIndex.THUMB:
            tip = (mcp_x - 0.15, mcp_y) if finger in extended else (mcp_x + 0.03, mcp_y)
        else:
            tip = (mcp_x, mcp_y - 0.2) if finger in extended else (mcp_x, mcp_y - 0.05)
        mcp_index, pip_index, dip_index, tip_index = FINGERS[finger]
        for index in (mcp_index, pip_index, dip_index):
            points[index] = Point(mcp_x, mcp_y)
        points[tip_index] = Point(*tip)

    if pinch_distance is not None:
        index_tip = points[HandLandmark.INDEX_FINGER_TIP]
        points[HandLandmark.THUMB_TIP] = Point(index_tip.x + pinch_distance, index_tip.y)

    return points
