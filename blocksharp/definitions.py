"""
One place to find all the registries by category, and the things that want all of them.
"""
import xml.etree.ElementTree as ET
from typing import Optional
from .graph import Node, Workspace
from .names import Category
from .registry import Registry, VariableRegistry
from .datatypes import DATATYPES
from .procedures import PROCEDURES
from .workflows import WORKFLOWS

VARIABLES = VariableRegistry()

REGISTRIES:dict[Category, Registry] = {
	Category.PROCEDURE: PROCEDURES,
	Category.VARIABLE: VARIABLES,
	Category.ALGEBRAIC_DATATYPE: DATATYPES,
	Category.COMPUTATION_EXPRESSION: WORKFLOWS,
}

def reserve(candidate:str, category:Category, workspace:Workspace, exclude:Optional[Node]=None) -> str:
	""" A legal, unused name for a definition in the given category. Calling again gives the same answer. """
	return REGISTRIES[category].reserve(candidate, workspace, exclude)

def toolbox(workspace:Workspace) -> dict[Category, list[ET.Element]]:
	""" The dynamic toolbox categories, in the order the editor shows them. """
	return {category: registry.toolbox(workspace) for category, registry in REGISTRIES.items()}
