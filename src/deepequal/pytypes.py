"""
Python types that are not directly importable by name but are needed for classifying values
"""

DictValuesType = type({}.values())

# Objects that only ever compare equal to themselves
SingletonObjects = (None, Ellipsis, NotImplemented)
