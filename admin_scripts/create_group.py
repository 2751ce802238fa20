from pathlib import Path

import click
import pandas as pd

from judgepool import schemas

from .admin_client import AdminClient, AdminClientSettings


def read_criteria(filename: Path) -> list[schemas.CriterionSave]:
    df = pd.read_csv(filename)
    criteria = []
    for index, row in df.iterrows():
        description = row.get("description")
        criteria.append(
            schemas.CriterionSave(
                question=row["question"],
                description=None if pd.isna(description) else description,
                weight=float(row["weight"]) if "weight" in row and not pd.isna(row["weight"]) else 1.0,
                order=int(index),  # type: ignore
            )
        )
    return criteria


def read_submissions(filename: Path) -> list[schemas.SubmissionRef]:
    df = pd.read_csv(filename, dtype={"submission_id": str})
    submissions = []
    for _, row in df.iterrows():
        submissions.append(
            schemas.SubmissionRef(
                submission_id=row["submission_id"],
                title=row["title"],
                slug=None if pd.isna(row.get("slug")) else row["slug"],
                url=None if pd.isna(row.get("url")) else row["url"],
            )
        )
    return submissions


def create_group(
    name: str,
    password: str | None,
    criteria_file: Path,
    submissions_file: Path,
    client: AdminClient,
) -> schemas.JudgingGroupInfo:
    existing = {group.name for group in client.get_groups()}
    if name in existing:
        raise click.ClickException(f"Judging group {name} already exists")
    group = client.create_group(
        schemas.JudgingGroupCreate(name=name, is_public=password is None, judge_password=password)
    )
    client.save_criteria(group.id, read_criteria(criteria_file))
    result = client.add_submissions(group.id, read_submissions(submissions_file))
    print(f"Created group {group.slug} ({group.id}): {result.added} submissions added, {result.skipped} skipped")
    for error in result.errors:
        print(error)
    return group


@click.command()
@click.option("--name", help="Name of the judging group", type=str, required=True)
@click.option("--password", help="Judge password, leave out for a public group", type=str, default=None)
@click.option("--criteria_file", help="CSV with question, description and weight columns", type=Path, required=True)
@click.option("--submissions_file", help="CSV with submission_id, title, slug and url columns", type=Path, required=True)
@click.option("--env_file", help=".env file to use", default=".env.admin", type=str)
def cli(name: str, password: str | None, criteria_file: Path, submissions_file: Path, env_file: str):
    create_group(name, password, criteria_file, submissions_file, AdminClient(AdminClientSettings(_env_file=env_file)))


if __name__ == "__main__":
    cli()
