def splice_marker(func):
    """
    Marks the function as a splice marker.
    A call to such a function with a function expression as the first argument
    will be replaced by the body of that function during unfolding,
    with the rest of the arguments substituted for its parameters.
    """
    func.__unfold_splice__ = True
    return func


def get_splice_tag(func):
    return getattr(func, '__unfold_splice__', None)
