"""
A functional walker for expression trees,
featuring explicit state passing and non-mutating transformation.
Modeled after ``ast.NodeVisitor`` and ``ast.NodeTransformer`` from the standard library.
"""

from unfold.core.nodes import Node, iter_fields
from unfold.tools.dispatcher import Dispatcher
from unfold.tools.immutable import ImmutableADict


def expr_walker(handler):
    """
    A generic expression tree walker decorator.
    Decorates either a function or a class (if dispatching based on node type is required).
    ``handler`` will be wrapped in a :py:class:`~unfold.Dispatcher` instance;
    see :py:class:`~unfold.Dispatcher` for the details of the required class structure.

    Returns a callable with the signature::

        def walker(state, node, ctx=None)

    :param state: a dictionary with the state which will be passed to every handler call.
        It will be converted into a :class:`~unfold.tools.ImmutableADict` object
        at the start of the traversal.
        Handlers can update it by returning a modified version.
    :param node: a :py:class:`~unfold.core.nodes.Node` object to traverse.
    :param ctx: a dictionary with the global context which will be passed to every handler call.
        It will be converted into a :class:`~unfold.tools.ImmutableADict` object
        at the start of the traversal.
    :returns: a tuple ``(state, new_node)``.
        Does not mutate ``node``.

    ``handler`` will be invoked for every node during the traversal (depth-first, pre-order).
    The ``handler`` function, if it is a function, or its static methods, if it is a class
    must have the signature::

        def handler([state, node, ctx, skip_fields, walk_field,] **kwds)

    The names of the arguments must be exactly as written here,
    but their order is not significant (they will be passed as keywords).

    If ``handler`` is a class, the default handler is a "pass-through" function
    that does not change the node or the state.

    :param state: the (immutable) state object passed during the initial call.
    :param node: the current node
    :param ctx: the (immutable) dictionary with the global context
        passed during the initial call.
    :param skip_fields: a function of no arguments, which, when called,
        orders the walker not to traverse this node's fields.
    :param walk_field: a function ``walk_field(state, value) -> (new_state, new_value)``,
        which traverses the given field value (a node, a tuple of nodes, or metadata).
    :returns: must return a tuple ``(new_state, new_node)``, where ``new_node`` is one of:

        * The passed ``node`` (unchanged).
          By default, its fields will be traversed (unless ``skip_fields()`` is called).
        * A new :py:class:`~unfold.core.nodes.Node` object, which will replace the passed
          ``node`` in the tree.
          Its fields will not be traversed,
          and the handler must do it manually if needed (by calling ``walk_field()``).
    """
    return _Walker(handler, transform=True)


def expr_inspector(handler):
    """
    A shortcut for :py:func:`~unfold.expr_walker` which does not transform the tree,
    but only collects data.
    Therefore:

    * the resulting walker returns only the resulting state;
    * the handler must return only the new (or the unchanged given) state
      instead of a tuple ``(new_state, new_node)``;
    * ``walk_field`` has the signature ``walk_field(state, value) -> new_state``.
    """
    return _Walker(handler)


class _Walker:

    def __init__(self, handler, transform=False):

        self._transform = transform

        # These method have different signatures depending on
        # whether transform is on,
        # so for the sake of performance we're using specialized versions of them.
        if self._transform:
            self._walk_field_user = self._transform_inspect_field
            def default_handler(state, node, **_):
                return state, node
        else:
            self._walk_field_user = self._inspect_field
            def default_handler(state, **_):
                return state

        self._handler = Dispatcher(handler, default_handler=default_handler)

    def _walk_sequence(self, state, seq, ctx):
        """
        Traverses a tuple of nodes.
        """
        transformed = False
        new_seq = []
        new_state = state

        for node in seq:
            new_state, new_node = self._walk_node(new_state, node, ctx)
            if new_node is not node:
                transformed = True
            new_seq.append(new_node)

        if self._transform and transformed:
            return new_state, tuple(new_seq)
        else:
            return new_state, seq

    def _walk_field(self, state, value, ctx):
        """
        Traverses a single node field.
        """
        if isinstance(value, Node):
            return self._walk_node(state, value, ctx)
        elif isinstance(value, tuple) and len(value) > 0 and isinstance(value[0], Node):
            return self._walk_sequence(state, value, ctx)
        else:
            return state, value

    # In these two functions `ctx` goes first because it makes it easier
    # to add it to the list of arguments later when `self._walk_field_user()` is called

    def _inspect_field(self, ctx, state, value):
        return self._walk_field(state, value, ctx)[0]

    def _transform_inspect_field(self, ctx, state, value):
        return self._walk_field(state, value, ctx)

    def _walk_fields(self, state, node, ctx):
        """
        Traverses all fields of a node.
        """
        transformed = False
        new_fields = {}
        new_state = state

        for field, value in iter_fields(node):
            if field in node._opaque_fields:
                new_fields[field] = value
                continue

            new_state, new_value = self._walk_field(new_state, value, ctx)
            new_fields[field] = new_value
            if new_value is not value:
                transformed = True

        if self._transform and transformed:
            return new_state, type(node)(**new_fields)
        else:
            return new_state, node

    def _handle_node(self, state, node, ctx):

        to_skip_fields = [False]
        def skip_fields():
            to_skip_fields[0] = True

        def walk_field(*args, **kwds):
            return self._walk_field_user(ctx, *args, **kwds)

        result = self._handler(
            # this argument is only used by the Dispatcher;
            # the user-defined handler gets keyword arguments
            node,
            state=state, node=node, ctx=ctx,
            skip_fields=skip_fields,
            walk_field=walk_field)

        if self._transform:
            new_state, new_node = result
            if not isinstance(new_node, Node):
                raise TypeError(
                    "Expected callback return type is Node, got {got}".format(got=type(new_node)))
        else:
            new_state, new_node = result, node

        return new_state, new_node, to_skip_fields[0]

    def _walk_node(self, state, node, ctx):
        """
        Traverses a node and its fields.
        """

        new_state, new_node, to_skip_fields = self._handle_node(state, node, ctx)

        if new_node is node and not to_skip_fields:
            new_state, new_node = self._walk_fields(new_state, new_node, ctx)

        return new_state, new_node

    def __call__(self, state, node, ctx=None):

        if ctx is not None:
            ctx = ImmutableADict(ctx)

        state = ImmutableADict(state)

        if isinstance(node, Node):
            new_state, new_node = self._walk_node(state, node, ctx)
        elif isinstance(node, tuple):
            new_state, new_node = self._walk_sequence(state, node, ctx)
        else:
            raise TypeError("Cannot walk an object of type " + str(type(node)))

        if self._transform:
            return new_state, new_node
        else:
            return new_state
