from .date import Date
from .element import (
    Element,
    ElementType,
    ElementParameter,
    PARAMETER_TYPES,
    Layer,
    XY,
    Datatype,
    Width,
    StructureName,
    ColRow,
    TextType,
    Presentation,
    String,
    StrTransf,
    Magnification,
    Angle,
    Pathtype,
    EFlags,
    Nodetype,
    BeginExt,
)
from .library import Library, Structure

__all__ = ["Date",
           "Library",
           "Structure",
           "Element",
           "ElementType",
           "ElementParameter",
           "PARAMETER_TYPES",
           "Layer", "XY", "Datatype", "Width", "StructureName", "ColRow",
           "TextType", "Presentation", "String", "StrTransf", "Magnification",
           "Angle", "Pathtype", "EFlags", "Nodetype", "BeginExt"]
