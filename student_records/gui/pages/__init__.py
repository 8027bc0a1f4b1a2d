from student_records.gui.pages.student_form import StudentFormWidget
from student_records.gui.pages.student_list import StudentListWidget

__all__ = ["StudentFormWidget", "StudentListWidget"]
