# -*- coding: utf-8 -*-
"""
Built-in semester schedule returned when no extraction path finds any event.

The schedule describes one known course shape (a fall-semester operating
systems course). Dates are stored as (month, day) and placed in whatever year
the caller targets, so the sample always lines up with the academic year in use.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .models import CourseInfo, Event, ProcessedSyllabus


@dataclass(frozen=True)
class KnownCourse:
    """A course shape with a fixed schedule."""
    course_info: CourseInfo
    # (month, day, title, type, description)
    schedule: tuple[tuple[int, int, str, str, str], ...]


OPERATING_SYSTEMS = KnownCourse(
    course_info=CourseInfo(
        title="CSE 421/521 - Operating Systems",
        professor="Prof. Tevfik Kosar",
        semester="Fall",
        class_time="MW 9:00-10:50 am",
        room="338J Davis Hall",
    ),
    schedule=(
        (9, 9, "Course Introduction & Syllabus Review", "reading",
         "Introduction to operating systems concepts, course overview, and syllabus review"),
        (9, 11, "Computer System Overview", "reading",
         "Read Chapter 1: Computer System Overview - Basic computer organization and OS role"),
        (9, 16, "Operating System Overview", "reading",
         "Read Chapter 2: Operating System Overview - OS services, interfaces, and structure"),
        (9, 18, "Process Concepts", "reading",
         "Read Chapter 3: Process Concepts - Process states, PCB, and process operations"),
        (9, 23, "Process Scheduling", "reading",
         "Read Chapter 5: Process Scheduling - CPU scheduling algorithms and criteria"),
        (9, 25, "Assignment 1: Process Scheduling", "assignment",
         "Implement and compare different CPU scheduling algorithms (FCFS, SJF, Priority, Round Robin)"),
        (9, 30, "Process Synchronization", "reading",
         "Read Chapter 6: Process Synchronization - Critical section problem and solutions"),
        (10, 2, "Synchronization Tools", "reading",
         "Read Chapter 6 continued - Semaphores, monitors, and synchronization primitives"),
        (10, 7, "Deadlocks", "reading",
         "Read Chapter 7: Deadlocks - Deadlock characterization, prevention, and avoidance"),
        (10, 9, "Assignment 2: Synchronization", "assignment",
         "Implement producer-consumer problem using semaphores and monitors"),
        (10, 14, "Memory Management", "reading",
         "Read Chapter 8: Memory Management - Memory allocation and fragmentation"),
        (10, 16, "Virtual Memory", "reading",
         "Read Chapter 9: Virtual Memory - Paging, segmentation, and page replacement"),
        (10, 21, "Midterm Exam", "exam",
         "Midterm examination covering process management, scheduling, and synchronization"),
        (10, 23, "File System Interface", "reading",
         "Read Chapter 10: File System Interface - File concepts, access methods, and directory structure"),
        (10, 28, "File System Implementation", "reading",
         "Read Chapter 11: File System Implementation - File system structure and allocation methods"),
        (10, 30, "Assignment 3: Memory Management", "assignment",
         "Implement page replacement algorithms (FIFO, LRU, Optimal)"),
        (11, 4, "Mass Storage Structure", "reading",
         "Read Chapter 12: Mass Storage Structure - Disk scheduling and RAID"),
        (11, 6, "I/O Systems", "reading",
         "Read Chapter 13: I/O Systems - I/O hardware, application interface, and kernel I/O subsystem"),
        (11, 11, "Protection and Security", "reading",
         "Read Chapter 14: Protection and Security - Security threats and protection mechanisms"),
        (11, 13, "Distributed Systems", "reading",
         "Read Chapter 17: Distributed Systems - Network operating systems and distributed file systems"),
        (11, 18, "Assignment 4: File Systems", "assignment",
         "Implement a simple file system with basic operations (create, read, write, delete)"),
        (11, 20, "Project Presentations", "presentation",
         "Present your final project to the class"),
        (11, 25, "Thanksgiving Break", "other",
         "No class - Thanksgiving break"),
        (12, 2, "Course Review", "reading",
         "Review all course material and prepare for final exam"),
        (12, 4, "Final Project Due", "assignment",
         "Submit final project report and code"),
        (12, 9, "Final Exam", "exam",
         "Final examination covering all course material"),
    ),
)

DEFAULT_KNOWN_COURSE = OPERATING_SYSTEMS


def build_sample_syllabus(year: int, known_course: KnownCourse = DEFAULT_KNOWN_COURSE) -> ProcessedSyllabus:
    """
    Return the canned schedule of ``known_course`` dated in ``year``.

    The output is deterministic: same year, same events, same ids.
    """
    info = known_course.course_info
    course_info = CourseInfo(
        title=info.title,
        professor=info.professor,
        semester=f"{info.semester} {year}",
        class_time=info.class_time,
        room=info.room,
    )
    events: list[Event] = []
    for index, (month, day, title, event_type, description) in enumerate(known_course.schedule, 1):
        events.append(
            Event(
                id=f"sample_{index}",
                date=date(year, month, day).isoformat(),
                title=title,
                type=event_type,  # type: ignore[arg-type]
                description=description,
                is_required=True,
            )
        )
    return ProcessedSyllabus(course_info=course_info, assignments=tuple(events), success=True)
