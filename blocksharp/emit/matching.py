"""
Pattern matching. The cases are a statement stack under the `match` block,
each one a `| pattern -> result` line.
"""
from ..generator import emitter, Order, Generation
from ..graph import Node

@emitter('match')
def match(gen:Generation, node:Node):
	subject = gen.value_to_code(node, 'VARIABLE', Order.ATOMIC) or '()'
	cases = gen.block_to_code(node.child('CASES')) if 'CASES' in node.inputs else ''
	return ('match %s with\n%s'%(subject, cases)).rstrip('\n'), Order.FUNCTION_MATCH_TRY

@emitter('matchcase')
def matchcase(gen:Generation, node:Node):
	pattern = gen.value_to_code(node, 'PATTERN', Order.PIPE_PATTERN_MATCH) or '_'
	result = gen.value_to_code(node, 'THEN', Order.FUNCTION_ARROW) or '()'
	return '| %s -> %s\n'%(pattern, result)

@emitter('matchcase_wildcard')
def matchcase_wildcard(gen:Generation, node:Node):
	return '_', Order.ATOMIC
