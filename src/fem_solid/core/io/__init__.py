from .readers import InputData, InputError, load_input

__all__ = ["InputData", "InputError", "load_input"]
