"""Block plans and the host editor interface."""
