"""
Type-blocks say what they denote. The type model already knows how to read them.
"""
from ..generator import emitter, Order, Generation
from ..graph import Node
from ..type_model import TYPE_KINDS, from_fragment, render_target

@emitter(*sorted(TYPE_KINDS))
def type_block(gen:Generation, node:Node):
	return render_target(from_fragment(node)), Order.ATOMIC
