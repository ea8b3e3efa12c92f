"""HTTP surface of the bridge proxy."""
