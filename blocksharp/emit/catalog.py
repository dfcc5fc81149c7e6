"""
Importing this module fills in the generator's EMITTERS table, every kind at once.
"""
from ..generator import EMITTERS
from . import type_blocks, datatypes, procedures, workflows, variables, logic, arithmetic, text, lists, matching

KINDS = frozenset(EMITTERS)
