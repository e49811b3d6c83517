"""APG pattern code decoding and placement."""
