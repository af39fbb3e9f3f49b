"""In-memory repositories for service and route tests.

Each fake exposes the same coroutine methods as its Cassandra repository
and enforces the same key uniqueness.
"""

from collections.abc import Sequence
from uuid import UUID, uuid4

from src.auth.security import create_access_token
from src.core.exceptions import AlreadyEnrolledError
from src.courses.models import ContentStatus, ContentType, Course, Lesson, Section
from src.progress.models import Enrollment, EnrollmentStatus, LessonProgress
from src.quizzes.models import QuizAttempt, QuizOption, QuizQuestion


class FakeCourseRepository:
    def __init__(self) -> None:
        self.courses: dict[UUID, Course] = {}
        self.sections: dict[UUID, list[Section]] = {}
        self.lessons: dict[UUID, Lesson] = {}
        self.section_lessons: dict[UUID, list[Lesson]] = {}

    async def get_course(self, course_id: UUID) -> Course | None:
        return self.courses.get(course_id)

    async def list_sections(self, course_id: UUID) -> list[Section]:
        return list(self.sections.get(course_id, []))

    async def get_lesson(self, lesson_id: UUID) -> Lesson | None:
        return self.lessons.get(lesson_id)

    async def list_lessons(self, section_id: UUID) -> list[Lesson]:
        return list(self.section_lessons.get(section_id, []))

    def add_course(
        self,
        instructor_id: UUID | None = None,
        status: ContentStatus = ContentStatus.PUBLISHED,
        title: str = "Farmacologia Basica",
    ) -> Course:
        course = Course(title=title, instructor_id=instructor_id or uuid4(), status=status.value)
        self.courses[course.id] = course
        self.sections[course.id] = []
        return course

    def add_section(self, course: Course, position: int, title: str = "") -> Section:
        section = Section(course_id=course.id, position=position, title=title or f"Secao {position}")
        self.sections[course.id].append(section)
        self.section_lessons[section.id] = []
        return section

    def add_lesson(
        self,
        section: Section,
        position: int,
        *,
        is_preview_free: bool = False,
        content_type: ContentType = ContentType.VIDEO,
        video_path: str | None = "cursos/aula.mp4",
    ) -> Lesson:
        lesson = Lesson(
            section_id=section.id,
            course_id=section.course_id,
            position=position,
            title=f"Aula {position}",
            content_type=content_type.value,
            is_preview_free=is_preview_free,
            video_path=video_path,
        )
        self.lessons[lesson.id] = lesson
        self.section_lessons[section.id].append(lesson)
        return lesson

    def seed_course(
        self,
        lessons_per_section: Sequence[int] = (2,),
        instructor_id: UUID | None = None,
        status: ContentStatus = ContentStatus.PUBLISHED,
    ) -> tuple[Course, list[Lesson]]:
        """Create a course and return it with its lessons in reading order."""
        course = self.add_course(instructor_id=instructor_id, status=status)
        lessons = []
        for section_position, count in enumerate(lessons_per_section, start=1):
            section = self.add_section(course, section_position)
            lessons.extend(
                self.add_lesson(section, position) for position in range(1, count + 1)
            )
        return course, lessons

    def remove_lesson(self, lesson: Lesson) -> None:
        self.lessons.pop(lesson.id, None)
        self.section_lessons[lesson.section_id].remove(lesson)


class FakeEnrollmentRepository:
    def __init__(self) -> None:
        self.rows: dict[tuple[UUID, UUID], Enrollment] = {}

    async def get_enrollment(self, user_id: UUID, course_id: UUID) -> Enrollment | None:
        return self.rows.get((user_id, course_id))

    async def list_user_enrollments(self, user_id: UUID) -> list[Enrollment]:
        return [e for (uid, _), e in self.rows.items() if uid == user_id]

    async def create(self, enrollment: Enrollment) -> Enrollment:
        key = (enrollment.user_id, enrollment.course_id)
        if key in self.rows:
            raise AlreadyEnrolledError
        self.rows[key] = enrollment
        return enrollment

    def enroll(
        self,
        user_id: UUID,
        course_id: UUID,
        status: str = EnrollmentStatus.ACTIVE.value,
    ) -> Enrollment:
        enrollment = Enrollment(course_id=course_id, user_id=user_id, status=status)
        self.rows[(user_id, course_id)] = enrollment
        return enrollment


class FakeLessonProgressRepository:
    def __init__(self) -> None:
        self.rows: dict[tuple[UUID, UUID], LessonProgress] = {}
        self.writes = 0

    async def find_one(self, user_id: UUID, lesson_id: UUID) -> LessonProgress | None:
        return self.rows.get((user_id, lesson_id))

    async def find_many(
        self, user_id: UUID, lesson_ids: Sequence[UUID]
    ) -> list[LessonProgress]:
        wanted = set(lesson_ids)
        return [
            row
            for (uid, lid), row in self.rows.items()
            if uid == user_id and lid in wanted
        ]

    async def upsert(self, progress: LessonProgress) -> LessonProgress:
        self.rows[(progress.user_id, progress.lesson_id)] = progress
        self.writes += 1
        return progress

    def complete(self, user_id: UUID, lesson: Lesson, completed: bool = True) -> None:
        self.rows[(user_id, lesson.id)] = LessonProgress(
            user_id=user_id,
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            completed=completed,
        )


class FakeQuizRepository:
    def __init__(self) -> None:
        self.questions: dict[UUID, list[QuizQuestion]] = {}
        self.attempts: dict[tuple[UUID, UUID], QuizAttempt] = {}

    async def list_questions(self, lesson_id: UUID) -> list[QuizQuestion]:
        return list(self.questions.get(lesson_id, []))

    async def find_attempt(self, user_id: UUID, lesson_id: UUID) -> QuizAttempt | None:
        return self.attempts.get((user_id, lesson_id))

    async def upsert_attempt(self, attempt: QuizAttempt) -> QuizAttempt:
        self.attempts[(attempt.user_id, attempt.lesson_id)] = attempt
        return attempt

    def add_question(
        self,
        lesson_id: UUID,
        position: int,
        options: int = 3,
        correct_index: int | None = 1,
    ) -> QuizQuestion:
        question = QuizQuestion(lesson_id=lesson_id, position=position, text=f"Pergunta {position}")
        question.options = [
            QuizOption(
                question_id=question.id,
                position=i,
                text=f"Opcao {i}",
                is_correct=i == correct_index,
            )
            for i in range(options)
        ]
        self.questions.setdefault(lesson_id, []).append(question)
        return question

    def seed_quiz(self, lesson_id: UUID, count: int) -> list[QuizQuestion]:
        return [self.add_question(lesson_id, position) for position in range(1, count + 1)]


def correct_answers(questions: Sequence[QuizQuestion]) -> dict[UUID, UUID]:
    """Map every question to its correct option."""
    return {q.id: q.correct_option.id for q in questions if q.correct_option}


def wrong_option(question: QuizQuestion) -> UUID:
    return next(o.id for o in question.options if not o.is_correct)


def auth_headers(user_id: UUID) -> dict[str, str]:
    """Bearer header for a freshly issued access token."""
    token = create_access_token(
        {"sub": str(user_id), "email": "aluno@example.com", "role": "student"}
    )
    return {"Authorization": f"Bearer {token}"}
