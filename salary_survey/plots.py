import textwrap
from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import polars as pl
import seaborn as sns
from matplotlib.figure import Figure

from salary_survey.analysis import SALARY, group_summary


def plot_salary_by(
    df: pl.DataFrame,
    by: str,
    path: Optional[Union[str, Path]] = None,
    order: Optional[list[str]] = None,
    value: str = SALARY,
) -> Figure:
    """Box plot of salary per group, groups ordered by median unless given."""
    data = df.select(by, value).drop_nulls()
    if order is None:
        order = group_summary(data, by, value)[by].to_list()

    coolwarm = sns.color_palette("coolwarm", 8)
    fig, ax = plt.subplots(figsize=(16, 6))

    sns.boxplot(
        data=data.to_dict(as_series=False),
        x=by,
        y=value,
        order=order,
        color=coolwarm[2],
        ax=ax,
    )
    ax.set_title(f"{by.replace('_', ' ')} to Annual Salary")
    ax.set_xlabel(by.replace("_", " "))
    ax.set_ylabel("Annual Salary (USD)")
    ax.set_xticks(range(len(order)))
    ax.set_xticklabels([textwrap.fill(str(label), 12) for label in order])

    fig.tight_layout()
    if path is not None:
        fig.savefig(path, dpi=300)
    return fig
