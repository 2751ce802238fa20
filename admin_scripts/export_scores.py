from pathlib import Path

import click
import pandas as pd
from beanie import PydanticObjectId

from judgepool import schemas

from .admin_client import AdminClient, AdminClientSettings

COLUMNS = {
    "judge_name": "Judge Name",
    "judge_email": "Judge Email",
    "judge_username": "Judge Username",
    "submission_title": "Submission Title",
    "submission_slug": "Submission Slug",
    "criterion_question": "Criterion",
    "criterion_description": "Criterion Description",
    "score": "Score",
    "total_score_for_submission": "Total Score",
    "comment": "Comment",
    "judge_notes": "Judge Notes",
    "is_hidden": "Hidden",
    "submitted_at": "Submitted At",
}


def rows_to_frame(rows: list[schemas.ExportRow], include_hidden: bool = True) -> pd.DataFrame:
    df = pd.DataFrame([row.model_dump() for row in rows], columns=list(COLUMNS))
    if not include_hidden:
        df = df[~df["is_hidden"].astype(bool)]
    return df.rename(columns=COLUMNS).reset_index(drop=True)


def export_scores(group_id: PydanticObjectId, output: Path, include_hidden: bool, client: AdminClient) -> int:
    rows = client.get_export_rows(group_id)
    df = rows_to_frame(rows, include_hidden=include_hidden)
    output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output, index=False)
    return len(df)


@click.command()
@click.option("--group_id", help="Id of the judging group to export", type=str, required=True)
@click.option("--output", help="CSV file to write", type=Path, required=True)
@click.option("--include_hidden/--exclude_hidden", help="Keep scores hidden by an administrator", default=True)
@click.option("--env_file", help=".env file to use", default=".env.admin", type=str)
def cli(group_id: str, output: Path, include_hidden: bool, env_file: str):
    n_rows = export_scores(
        PydanticObjectId(group_id), output, include_hidden, AdminClient(AdminClientSettings(_env_file=env_file))
    )
    print(f"Exported {n_rows} scores to {output}")


if __name__ == "__main__":
    cli()
