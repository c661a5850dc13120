# dsfem/model/component.py
"""Base class for tagged model entities."""


class ModelComponent:
    """Anything identified in a model by a string tag."""

    def __init__(self, tag: str):
        self._tag = str(tag)

    @property
    def tag(self) -> str:
        return self._tag

    def get_model_tag(self) -> str:
        return self._tag

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self._tag}')"
