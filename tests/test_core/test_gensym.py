from unfold.core.gensym import GenSym


def test_per_tag_counters():
    gen_sym = GenSym()
    name1, gen_sym = gen_sym("x")
    name2, gen_sym = gen_sym("x")
    name3, gen_sym = gen_sym("temp")

    assert name1 == "__unfold_x_1"
    assert name2 == "__unfold_x_2"
    assert name3 == "__unfold_temp_1"


def test_taken_names():
    gen_sym = GenSym(taken_names={"__unfold_sym_1"})
    name, gen_sym = gen_sym()
    assert name == "__unfold_sym_2"


def test_immutability():
    gen_sym = GenSym()
    name1, _ = gen_sym("x")
    name2, _ = gen_sym("x")
    # The same generator produces the same name
    assert name1 == name2
