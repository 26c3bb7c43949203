# utils/crashlog.py
import os, sys, faulthandler, datetime, traceback, threading, asyncio

_fault_file = None

def log_dir() -> str:
    d = os.path.join(os.getcwd(), "logs")
    os.makedirs(d, exist_ok=True)
    return d

def _dump(prefix: str, header: str, exc: BaseException = None, text: str = "") -> str:
    stamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    path = os.path.join(log_dir(), f"{prefix}-{stamp}.txt")
    with open(path, "w", encoding="utf-8") as out:
        out.write(header + "\n" + "=" * 60 + "\n")
        if exc is not None:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=out)
        if text:
            out.write(text + "\n")
    return path

def setup_crashlog():
    """Write native faults and uncaught exceptions (main + threads) under logs/."""
    global _fault_file
    if _fault_file is None:
        stamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
        _fault_file = open(os.path.join(log_dir(), f"native-{stamp}.txt"), "w", encoding="utf-8")
        faulthandler.enable(_fault_file, all_threads=True)

    def _hook(exc_type, exc, tb):
        try:
            _dump("crash", "UNCAUGHT EXCEPTION", exc.with_traceback(tb))
        finally:
            sys.__excepthook__(exc_type, exc, tb)
    sys.excepthook = _hook
    threading.excepthook = lambda args: _hook(args.exc_type, args.exc_value, args.exc_traceback)

def install_async_handler(loop: asyncio.AbstractEventLoop):
    """Exceptions nobody retrieved from a task end up in logs/async-*.txt."""
    def _handler(loop, context):
        try:
            _dump("async", "ASYNCIO EXCEPTION", context.get("exception"), str(context.get("message", "")))
        finally:
            loop.default_exception_handler(context)
    loop.set_exception_handler(_handler)

def log_exception(title: str, exc: BaseException) -> str:
    return _dump("error", f"[{title}] {type(exc).__name__}: {exc}", exc)
