import pytest

from gbsplay.impulsegen import IMPULSE_HEIGHT, format_impulse_header, gen_impulsetab

REFERENCE = [
    0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 16777216, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0,
    -363, 1849, -4948, 10417, -19315, 33033, -53332, 82457, -123382, 180400, -260509, 376947, -559631, 895199, -1780563, 16345233, 2307495, -1030846, 623143, -414559, 285464, -197894, 135916, -91444, 59685, -37412, 22231, -12271, 6057, -2448, 614, -7,
    -487, 2933, -8221, 17683, -33206, 57277, -93060, 144571, -217096, 318167, -459858, 664550, -981602, 1548641, -2947130, 15089751, 4990298, -2055557, 1217403, -803887, 552216, -382888, 263457, -177806, 116556, -73476, 43992, -24546, 12326, -5151, 1418, -52,
    -437, 3258, -9622, 21184, -40314, 70161, -114740, 179138, -270005, 396702, -573989, 828702, -1218622, 1899280, -3482368, 13127507, 7845425, -2911747, 1684383, -1102909, 755456, -523769, 360994, -244358, 160851, -101957, 61491, -34664, 17689, -7620, 2270, -154,
    -300, 2964, -9290, 20977, -40491, 71130, -117115, 183786, -278082, 409660, -593500, 856328, -1254371, 1934043, -3435526, 10638395, 10638395, -3435526, 1934043, -1254371, 856328, -593500, 409660, -278082, 183786, -117115, 71130, -40491, 20977, -9290, 2964, -300,
    -154, 2270, -7620, 17689, -34664, 61491, -101957, 160851, -244358, 360994, -523769, 755456, -1102909, 1684383, -2911747, 7845425, 13127507, -3482368, 1899280, -1218622, 828702, -573989, 396702, -270005, 179138, -114740, 70161, -40314, 21184, -9622, 3258, -437,
    -52, 1418, -5151, 12326, -24546, 43992, -73476, 116556, -177806, 263457, -382888, 552216, -803887, 1217403, -2055557, 4990298, 15089751, -2947130, 1548641, -981602, 664550, -459858, 318167, -217096, 144571, -93060, 57277, -33206, 17683, -8221, 2933, -487,
    -7, 614, -2448, 6057, -12271, 22231, -37412, 59685, -91444, 135916, -197894, 285464, -414559, 623143, -1030846, 2307495, 16345233, -1780563, 895199, -559631, 376947, -260509, 180400, -123382, 82457, -53332, 33033, -19315, 10417, -4948, 1849, -363,
]


def test_gen_impulsetab_matches_reference():
    assert gen_impulsetab(5, 3, 1.0) == REFERENCE


@pytest.mark.parametrize("w_shift,n_shift", [(4, 2), (5, 3), (3, 4)])
def test_rows_sum_to_impulse_height(w_shift, n_shift):
    width = 1 << w_shift
    table = gen_impulsetab(w_shift, n_shift, 1.0)
    assert len(table) == width * (1 << n_shift)
    for start in range(0, len(table), width):
        assert sum(table[start:start + width]) == int(IMPULSE_HEIGHT)


def test_first_row_is_unshifted_impulse():
    table = gen_impulsetab(4, 2, 0.9)
    row = table[:16]
    assert row[7] == int(IMPULSE_HEIGHT)
    assert sum(abs(v) for v in row) == int(IMPULSE_HEIGHT)


def test_format_impulse_header_layout():
    text = format_impulse_header([1, 2, 3, 4], 1, 1)
    assert text == (
        "#define IMPULSE_N_SHIFT 1\n"
        "#define IMPULSE_W_SHIFT 1\n"
        "static const int32_t base_impulse[] = {"
        "\n\t        1,        2,"
        "\n\t        3,        4,"
        "\n};\n"
    )


def test_format_impulse_header_rows_match_table():
    table = gen_impulsetab(5, 3, 1.0)
    text = format_impulse_header(table, 5, 3)
    rows = [line for line in text.splitlines() if line.startswith("\t")]
    assert len(rows) == 8
    values = [int(v) for line in rows for v in line.strip().rstrip(",").split(",")]
    assert values == table


def test_format_impulse_header_rejects_wrong_length():
    with pytest.raises(ValueError):
        format_impulse_header([0, 1, 2], 1, 1)