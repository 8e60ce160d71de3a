"""Top‑level package for Finwise.

The primary modules are:

* ``analysis`` – validation and the financial analysis engine
* ``grocery`` – the grocery planner and its aggregates
* ``storage`` – key-value stores and the grocery list repository
* ``visualization`` – functions that generate Plotly figures
* ``Home`` – the Streamlit app that ties everything together

To run the app from the command line you can execute:

```bash
streamlit run finwise/Home.py
```

or use ``run_finwise.py`` in the project root.
"""

from .advice import RiskLevel  # noqa: F401  # re-exported for convenience
from .analysis import (  # noqa: F401
    AnalysisResult,
    AnalysisRunner,
    FinancialInput,
    analyze,
    analyze_async,
    validate,
)
from .grocery import GroceryItem, GroceryPlanner  # noqa: F401
from .storage import GroceryRepository, JsonFileStore, MemoryStore  # noqa: F401

__all__ = [
    "RiskLevel",
    "AnalysisResult",
    "AnalysisRunner",
    "FinancialInput",
    "analyze",
    "analyze_async",
    "validate",
    "GroceryItem",
    "GroceryPlanner",
    "GroceryRepository",
    "JsonFileStore",
    "MemoryStore",
]
