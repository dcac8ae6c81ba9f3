import os
import re
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.collection import Collection

from schemas import Project

DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "university_projects")

# MongoClient connects lazily, so importing this module never touches the network.
client = MongoClient(DATABASE_URL)
db = client[DATABASE_NAME]


def to_document(project: Project) -> Dict[str, Any]:
    doc = project.model_dump(mode="json", exclude={"id"})
    if project.id is not None:
        doc["_id"] = ObjectId(project.id)
    return doc


def from_document(doc: Dict[str, Any]) -> Project:
    d = {**doc}
    d["id"] = str(d.pop("_id"))
    return Project.model_validate(d)


class ProjectRepository:
    """Project documents in one collection, each with its tasks embedded."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def find_all(self) -> List[Project]:
        return [from_document(d) for d in self.collection.find()]

    def find_by_id(self, project_id: str) -> Optional[Project]:
        # A malformed id cannot belong to any stored project.
        if not ObjectId.is_valid(project_id):
            return None
        doc = self.collection.find_one({"_id": ObjectId(project_id)})
        return from_document(doc) if doc else None

    def save(self, project: Project) -> Project:
        doc = to_document(project)
        if project.id is None:
            res = self.collection.insert_one(doc)
            return project.model_copy(update={"id": str(res.inserted_id)})
        self.collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)
        return project

    def delete(self, project: Project) -> None:
        self.collection.delete_one({"_id": ObjectId(project.id)})

    def find_by_status(self, status: str) -> List[Project]:
        return [from_document(d) for d in self.collection.find({"status": status})]

    def find_by_member(self, member: str) -> List[Project]:
        return [from_document(d) for d in self.collection.find({"members": member})]

    def find_by_subject(self, subject: str) -> List[Project]:
        return [from_document(d) for d in self.collection.find({"subject": subject})]

    def find_by_title_containing(self, text: str) -> List[Project]:
        query = {"title": {"$regex": re.escape(text), "$options": "i"}}
        return [from_document(d) for d in self.collection.find(query)]
