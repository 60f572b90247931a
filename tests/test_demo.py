import pytest

from workpool.demo import main, sum1, sum2


def test_sum1_adds_two_values():
    assert sum1(2, 5) == 7


@pytest.mark.parametrize("a, b, c", [(1, 2, 3), (-4, 10, 0), (100, 200, 300)])
def test_sum2_matches_chained_sum1(a, b, c):
    assert sum2(a, b, c) == sum1(sum1(a, b), c)


def test_sum_functions_work_on_strings():
    assert sum1("ab", "cd") == "abcd"
    assert sum2("a", "b", "c") == sum1("ab", "c")


def test_main_prints_first_sum(capsys):
    code = main(["--task-seconds", "0", "--linger", "0", "--no-pause"])
    out = capsys.readouterr().out
    assert code == 0
    assert out.splitlines()[0] == "3"


def test_main_rejects_bad_thread_count():
    with pytest.raises(SystemExit):
        main(["--threads", "many", "--no-pause"])