"""
Booleans, comparisons, and the expression-level `if`.
"""
from ..generator import emitter, Order, Generation
from ..graph import Node

COMPARISONS = {'EQ': '=', 'NEQ': '<>', 'LT': '<', 'LTE': '<=', 'GT': '>', 'GTE': '>='}

@emitter('logic_compare')
def logic_compare(gen:Generation, node:Node):
	operator = COMPARISONS[node.field('OP')]
	a = gen.value_to_code(node, 'A', Order.RELATIONAL) or '0'
	b = gen.value_to_code(node, 'B', Order.RELATIONAL) or '0'
	return '%s %s %s'%(a, operator, b), Order.RELATIONAL

@emitter('logic_operation')
def logic_operation(gen:Generation, node:Node):
	if node.field('OP') == 'AND': operator, order, neutral = '&&', Order.AND, 'true'
	else: operator, order, neutral = '||', Order.OR, 'false'
	a = gen.value_to_code(node, 'A', order)
	b = gen.value_to_code(node, 'B', order)
	if not (a or b):
		a = b = 'false'
	return '%s %s %s'%(a or neutral, operator, b or neutral), order

@emitter('logic_negate')
def logic_negate(gen:Generation, node:Node):
	# `not` is an ordinary function in F#, so its operand goes by application rules.
	return 'not ' + (gen.value_to_code(node, 'BOOL', Order.ATOMIC) or 'true'), Order.FUNCTION_APPLICATION

@emitter('logic_boolean')
def logic_boolean(gen:Generation, node:Node):
	return ('true' if node.field('BOOL') == 'TRUE' else 'false'), Order.ATOMIC

@emitter('logic_unit')
def logic_unit(gen:Generation, node:Node):
	return '()', Order.ATOMIC

@emitter('logic_ternary')
def logic_ternary(gen:Generation, node:Node):
	condition = gen.value_to_code(node, 'IF', Order.IF) or 'false'
	then = gen.value_to_code(node, 'THEN', Order.IF) or '()'
	otherwise = gen.value_to_code(node, 'ELSE', Order.IF) or '()'
	return 'if %s then %s else %s'%(condition, then, otherwise), Order.IF
