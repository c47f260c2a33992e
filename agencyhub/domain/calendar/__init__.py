"""Calendar domain - event storage, visibility and per-day classification"""
