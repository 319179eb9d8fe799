"""Coding-convention fingerprints for generated files."""

from __future__ import annotations

from typing import Callable, List, Tuple

# (pattern name, predicate over file content), in reporting order.
_FINGERPRINTS: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    # state management
    ("react-useState", lambda c: "useState" in c),
    ("react-useReducer", lambda c: "useReducer" in c),
    ("react-context", lambda c: "createContext" in c),
    ("zustand-store", lambda c: "zustand" in c),
    ("redux", lambda c: "redux" in c),
    # data fetching
    ("swr", lambda c: "useSWR" in c),
    ("react-query", lambda c: "useQuery" in c),
    ("next-ssr", lambda c: "getServerSideProps" in c),
    ("next-ssg", lambda c: "getStaticProps" in c),
    # styling
    ("tailwind-dynamic", lambda c: "className=" in c and "`" in c),
    ("styled-components", lambda c: "styled." in c),
    ("emotion", lambda c: "css`" in c),
    # forms
    ("react-hook-form", lambda c: "useForm" in c),
    ("formik", lambda c: "Formik" in c),
    ("zod-validation", lambda c: "zod" in c),
    # auth
    ("next-auth", lambda c: "getServerSession" in c),
    ("supabase-auth", lambda c: "supabase.auth" in c),
    # error handling
    ("try-catch", lambda c: "try {" in c and "catch" in c),
    ("error-boundary", lambda c: "ErrorBoundary" in c),
)


def detect_patterns(content: str) -> List[str]:
    """Return the convention fingerprints present in ``content``."""
    return [name for name, matches in _FINGERPRINTS if matches(content)]


__all__ = ["detect_patterns"]
