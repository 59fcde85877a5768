import asyncio
import inspect
import time
from functools import wraps
from typing import List, Dict, Any, Callable, Optional, Type

_suite_state: Dict[str, List[Dict[str, Any]]] = {
    'tests': [],
    'results': []
}

PASS_FACE = '(^ ω ^)'
FAIL_FACE = '(ﾉಥДಥ)ﾉ'
SUMMARY_FACE = '☆*:.｡.o(≧▽≦)o.｡.:*☆'

SLOW_MS = 50.0


class _c:
    ok = '\033[92m'
    fail = '\033[91m'
    warn = '\033[93m'
    info = '\033[94m'
    grey = '\033[90m'
    reset = '\033[0m'


class TestAssertionError(AssertionError):
    """assertion failure raised by the helpers below, reported apart from crashes."""
    pass


# --- registration ---

def test(description: str) -> Callable:
    """
    register a function as a test case.

    coroutine functions are accepted too: they are driven with asyncio.run, so
    the same test runs unchanged under `suite.run` and under pytest.
    """

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                return asyncio.run(func(*args, **kwargs))
        else:
            wrapper = func

        _suite_state['tests'].append({'func': wrapper, 'description': description})
        return wrapper

    return decorator


# --- assertions ---

def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise TestAssertionError(message)


def assert_equal(actual: Any, expected: Any, message: str = "values differ") -> None:
    if actual != expected:
        raise TestAssertionError(f"{message}: expected {expected!r}, got {actual!r}")


def assert_raises(error_type: Type[BaseException], func: Callable, *args, **kwargs) -> BaseException:
    """call func and return the error it raised; fail if it raised nothing or something else."""
    try:
        result = func(*args, **kwargs)
        if inspect.iscoroutine(result):
            asyncio.run(result)
    except error_type as error:
        return error
    except Exception as error:
        raise TestAssertionError(
            f"expected {error_type.__name__}, got {type(error).__name__}: {error}"
        ) from error
    raise TestAssertionError(f"expected {error_type.__name__}, nothing was raised")


# --- runner ---

def run(title: str = "test run") -> bool:
    """run every registered test, print a report and return whether all passed."""
    print(f"\n{_c.info}--- starting: {title} ---{_c.reset}")
    start_time = time.perf_counter()

    _suite_state['results'] = []

    for test_item in _suite_state['tests']:
        result = _run_one(test_item['func'], test_item['description'])
        _suite_state['results'].append(result)
        _print_result(result)

    all_passed = _print_summary(start_time)

    # allows several separate suite runs in a single script
    _suite_state['tests'] = []
    return all_passed


def _run_one(func: Callable, description: str) -> Dict[str, Any]:
    error: Optional[str] = None
    started = time.perf_counter()
    try:
        func()
    except TestAssertionError as e:
        error = f"assertion failed: {e}"
    except Exception as e:
        error = f"{type(e).__name__}: {e}"
    duration = (time.perf_counter() - started) * 1000
    return {'passed': error is None, 'description': description, 'error': error, 'duration': duration}


def _print_result(result: Dict[str, Any]) -> None:
    timing = f"{_c.warn}{result['duration']:.1f}ms{_c.reset}" if result['duration'] > SLOW_MS else ""
    if result['passed']:
        print(f"  {_c.ok}✔ pass{_c.reset}  {PASS_FACE}  {result['description']} {timing}")
    else:
        print(f"  {_c.fail}✖ fail{_c.reset}  {FAIL_FACE}  {result['description']} {timing}")
        print(f"    {_c.grey}└─> {result['error']}{_c.reset}")


def _print_summary(start_time: float) -> bool:
    duration = (time.perf_counter() - start_time) * 1000
    results = _suite_state['results']

    total = len(results)
    passed_count = sum(1 for r in results if r['passed'])
    failed_count = total - passed_count

    summary_color = _c.ok if failed_count == 0 else _c.fail

    print(f"\n{summary_color}--- summary ---{_c.reset}")
    print(f"  {SUMMARY_FACE}  ran {_c.info}{total}{_c.reset} tests in {_c.warn}{duration:.2f}ms{_c.reset}")
    print(f"  {_c.ok}passed: {passed_count}{_c.reset}, {_c.fail}failed: {failed_count}{_c.reset}")
    print(f"{summary_color}---------------{_c.reset}\n")
    return failed_count == 0
