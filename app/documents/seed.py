import logging

from app.documents.placeholder import placeholder_pdf

logger = logging.getLogger(__name__)

# (name, filename, subject)
SAMPLE_DOCUMENTS = (
    ("Calculus I Lecture Notes", "calculus-lecture-notes.pdf", "Mathematics"),
    ("Linear Algebra Problem Set", "linear-algebra-problems.pdf", "Mathematics"),
    ("Introduction to Mechanics", "intro-to-mechanics.pdf", "Physics"),
    ("Organic Chemistry Basics", "organic-chemistry-basics.pdf", "Chemistry"),
    ("Data Structures Cheat Sheet", "data-structures-cheat-sheet.pdf", "Computer Science"),
)


async def seed_sample_documents(documents, blobs, samples=SAMPLE_DOCUMENTS) -> int:
    """
    Fill an empty collection with placeholder documents.

    Does nothing when any record exists. Samples whose filename is already
    stored are skipped, so overlapping runs do not duplicate them.
    Returns the number of records inserted.
    """
    if await documents.count() > 0:
        logger.info("Document collection not empty, skipping sample data")
        return 0

    inserted = 0
    for name, filename, subject in samples:
        if await documents.exists_filename(filename):
            continue

        data = placeholder_pdf(name, [
            f"Subject: {subject}",
            "This is a sample document created on first start.",
            "Log in as admin to upload real PDFs.",
        ])
        file_id = await blobs.write(filename, data)
        await documents.insert(name=name, filename=filename, subject=subject, file_id=file_id)
        inserted += 1

    logger.info("Seeded %d sample documents", inserted)
    return inserted
