"""Recipe records and the stores that hold them."""
